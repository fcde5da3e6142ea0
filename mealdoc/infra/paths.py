from pathlib import Path

# Centralized paths for runtime resources (single source of truth)
DATA_DIR = (Path(__file__).parent.parent / 'data').resolve()
FONT_DIR = DATA_DIR / 'fonts'

__all__ = ['DATA_DIR', 'FONT_DIR']
