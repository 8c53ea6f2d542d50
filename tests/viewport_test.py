import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from core.errors import MalformedViewportSpec
from utils.viewport import Viewport, parse_viewport

def test_parse_valid_sizes():
    assert parse_viewport("800x600") == Viewport(800, 600)
    assert parse_viewport("1280x720") == Viewport(1280, 720)
    assert parse_viewport("1x1") == Viewport(1, 1)

@pytest.mark.parametrize("width,height", [(1, 1), (320, 480), (1920, 1080), (3840, 2160)])
def test_parse_round_trips_formatted_sizes(width, height):
    viewport = parse_viewport(f"{width}x{height}")
    assert (viewport.width, viewport.height) == (width, height)
    assert str(viewport) == f"{width}x{height}"

@pytest.mark.parametrize("spec", [
    "", "800", "800x", "x600", "800x600x2", "800*600", "800 x 600", " 800x600",
    "800x600\n", "0x600", "800x0", "-800x600", "800.5x600", "abcxdef", "800X600",
])
def test_parse_rejects_malformed(spec):
    with pytest.raises(MalformedViewportSpec):
        parse_viewport(spec)

def test_malformed_viewport_is_value_error():
    with pytest.raises(ValueError):
        parse_viewport("wide")

def test_viewport_as_dict():
    assert Viewport(800, 600).as_dict() == {'width': 800, 'height': 600}
