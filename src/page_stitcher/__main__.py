import sys

from page_stitcher.cli import main

sys.exit(main())
