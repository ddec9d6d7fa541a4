#!/usr/bin/env python3
"""Write our pid to argv[1], then sleep until killed.

Usage:
    python write_pid.py PID_FILE
"""

import os
import sys
import time

with open(sys.argv[1], "w", encoding="utf-8") as f:
    f.write(str(os.getpid()))

time.sleep(60)
