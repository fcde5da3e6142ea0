"""Configuration management for the meal plan document service."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

from mealdoc.infra.paths import FONT_DIR as _DEFAULT_FONT_DIR

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# Font resources: where the renderer expects its TTF files at runtime
FONT_DIR: Final[Path] = Path(os.getenv('MEALDOC_FONT_DIR', str(_DEFAULT_FONT_DIR)))

# Branding
BRAND_NAME: Final[str] = os.getenv('BRAND_NAME', 'TailoredMealPlan.com')
BRAND_TAGLINE: Final[str] = os.getenv('BRAND_TAGLINE', 'Personalized Nutrition Plans')
WATERMARK_TEXT: Final[str] = os.getenv('WATERMARK_TEXT', 'FREE PLAN - TailoredMealPlan.com')
