import sys

from selfbuild.build import main

sys.exit(main())
