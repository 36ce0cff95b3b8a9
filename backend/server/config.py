"""
Configuration for the featurekit Backend
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Flask Configuration
DEBUG = os.getenv('DEBUG', 'False') == 'True'
HOST = os.getenv('HOST', '0.0.0.0')
PORT = int(os.getenv('PORT', 5000))

# File Upload Configuration
MAX_FILE_SIZE = 50 * 1024 * 1024  # 50 MB
ALLOWED_EXTENSIONS = {'jpg', 'jpeg', 'png', 'bmp', 'tiff', 'tif'}

# Extraction Defaults
DEFAULT_RESIZE = int(os.getenv('DEFAULT_RESIZE', 800))
MAX_LEVELS = 6

# API Configuration
API_VERSION = '1.0.0'
API_TITLE = 'featurekit Backend API'
