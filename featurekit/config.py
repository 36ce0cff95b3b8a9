"""
Configuration for featurekit
Defaults for the feature extractors, overridable from the environment.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# PHOG Configuration
PHOG_LEVELS = int(os.getenv('FEATUREKIT_PHOG_LEVELS', 3))
PHOG_BINS = int(os.getenv('FEATUREKIT_PHOG_BINS', 8))

# Canny hysteresis thresholds (on 8-bit intensities)
CANNY_LOW = float(os.getenv('FEATUREKIT_CANNY_LOW', 50))
CANNY_HIGH = float(os.getenv('FEATUREKIT_CANNY_HIGH', 150))

# Keypoint Configuration
DESCRIPTOR_LENGTH = int(os.getenv('FEATUREKIT_DESCRIPTOR_LENGTH', 128))
ASCII_VALUES_PER_LINE = 20
