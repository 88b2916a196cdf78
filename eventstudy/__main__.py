"""Allow ``python -m eventstudy``."""

from eventstudy.main import main

main()
