import sys

from web_rag.cli import main

sys.exit(main())
