import sys

from nfasim.simulator import main

sys.exit(main())
