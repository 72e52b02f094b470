import sys

from sitemigrate.cli import main

sys.exit(main())
