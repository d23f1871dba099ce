import sys

from garage_booking.main import main

sys.exit(main())
