"""Allow ``python -m rskills``."""

from rskills.main import main

main()
