import sys

from issue_resolver.main import main

sys.exit(main())
