from typing import Dict


def init_metrics() -> Dict[str, int | float | str | dict]:
    return {
        'rooms_attempted': 0,
        'rooms_placed': 0,
        'rooms_rejected': 0,
        'corridors_carved': 0,
        'corridor_cells': 0,
        'exit_strategy': 'none',
        'tiles_floor': 0,
        'tiles_wall': 0,
        'tiles_interior_wall': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
