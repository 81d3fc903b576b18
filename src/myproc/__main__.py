"""Allow ``python -m myproc``."""

from .cli import main

raise SystemExit(main())
