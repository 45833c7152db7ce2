# tracker/config.py
"""Configuration settings for the order tracker"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# File paths
DATA_DIR = os.getenv('TRACKER_DATA_DIR', './data')

# Storage
STORAGE_KEY = os.getenv('TRACKER_STORAGE_KEY', 'logitrack_orders')
WATCH_INTERVAL_SEC = float(os.getenv('TRACKER_WATCH_INTERVAL_SEC', '1.0'))

# Order defaults
DEFAULT_CITY = os.getenv('TRACKER_DEFAULT_CITY', 'Unknown')
DEFAULT_QUANTITY = 1

# Simulation settings
TICK_INTERVAL_SEC = float(os.getenv('TRACKER_TICK_INTERVAL_SEC', '2.0'))
STEP_FRACTION = float(os.getenv('TRACKER_STEP_FRACTION', '0.05'))
ARRIVAL_THRESHOLD = float(os.getenv('TRACKER_ARRIVAL_THRESHOLD', '0.001'))

# Reference point for synthesized customer locations (demo only)
REFERENCE_LAT = float(os.getenv('TRACKER_REFERENCE_LAT', '24.7136'))
REFERENCE_LNG = float(os.getenv('TRACKER_REFERENCE_LNG', '46.6753'))
CUSTOMER_OFFSET_SPAN = float(os.getenv('TRACKER_CUSTOMER_OFFSET_SPAN', '0.1'))

# Progress output
VERBOSE = os.getenv('TRACKER_VERBOSE', '1').lower() not in ('0', 'false', 'no')
