import sys

from inverted_search.app import main


sys.exit(main())
