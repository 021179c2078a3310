import sys

from api_transform.cli import main

sys.exit(main())
