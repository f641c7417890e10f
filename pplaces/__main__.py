import sys

from pplaces.main import main

sys.exit(main())
