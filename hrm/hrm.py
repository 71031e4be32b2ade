"""
Trusted HRM — command-line attendance client
============================================
Sign in, check in/out, browse attendance reports, leave requests and
notifications against the HRM backend configured in ~/.hrm/config.json
(or HRM_API_BASE_URL).

Usage:
    python hrm.py login you@company.com
    python hrm.py check
    python hrm.py status
"""

import sys

from hrm_core.runner import main

if __name__ == "__main__":
    sys.exit(main())
