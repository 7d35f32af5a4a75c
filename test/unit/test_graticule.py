from __future__ import annotations

import pytest

from core.graticule import GraticuleRenderer, graticule_lines
from core.surface import VectorSurface


def test_major_divisions_skip_center_and_frame():
    grid = [line for line in graticule_lines() if line.role == "grid"]
    verticals = sorted({line.x1 for line in grid if line.x1 == line.x2})
    horizontals = sorted({line.y1 for line in grid if line.y1 == line.y2})
    expected = [62.5, 125.0, 187.5, 312.5, 375.0, 437.5]
    assert verticals == expected
    assert horizontals == expected
    assert len(grid) == 12
    for line in grid:
        assert {line.x1, line.x2, line.y1, line.y2} & {0.0, 500.0}


def test_minor_ticks_are_short_crosshairs_on_centerline():
    marks = [line for line in graticule_lines() if line.role == "mark"]
    assert len(marks) == 64
    positions = sorted({line.x1 for line in marks if line.x1 == line.x2})
    assert positions[0] == 12.5
    assert positions[-1] == 487.5
    assert 250.0 not in positions
    assert not any(p % 62.5 == 0 for p in positions)
    for line in marks:
        if line.x1 == line.x2:
            assert (line.y1, line.y2) == (245.0, 255.0)
        else:
            assert (line.x1, line.x2) == (245.0, 255.0)


def test_draw_grid_populates_surface_once():
    surface = VectorSurface()
    renderer = GraticuleRenderer(surface)
    renderer.draw_grid()
    first = list(surface.lines)
    assert len(first) == 76
    assert surface.grid_lines == tuple(first)

    renderer.draw_grid()
    GraticuleRenderer(surface).draw_grid()
    assert surface.lines == first


def test_surface_refuses_second_grid():
    surface = VectorSurface()
    surface.set_grid(graticule_lines())
    with pytest.raises(RuntimeError):
        surface.set_grid(graticule_lines())


def test_grid_independent_of_traces():
    surface = VectorSurface()
    for channel in (1, 2, 3):
        surface.ensure_trace(channel)
    GraticuleRenderer(surface).draw_grid()
    assert surface.lines == graticule_lines()
