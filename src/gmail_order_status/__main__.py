import sys

from gmail_order_status.cli import main

sys.exit(main())
