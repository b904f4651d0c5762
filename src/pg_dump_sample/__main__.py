import sys

from pg_dump_sample.cli import main

sys.exit(main())
