import sys

from sentience_mission_system.cli import main

sys.exit(main())
