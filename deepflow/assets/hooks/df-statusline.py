#!/usr/bin/env python3
"""deepflow statusline hook for Claude Code: model | project | context usage."""

import sys

from deepflow.statusline import main

if __name__ == '__main__':
    sys.exit(main())
