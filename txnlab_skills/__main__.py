import sys

from txnlab_skills.cli import main

sys.exit(main())
