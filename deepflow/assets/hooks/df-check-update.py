#!/usr/bin/env python3
"""deepflow update check hook: starts a background registry check and exits."""

import sys

from deepflow.update_check import main

if __name__ == '__main__':
    sys.exit(main())
