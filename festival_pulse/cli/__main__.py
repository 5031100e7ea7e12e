# =============================================================================
# festival_pulse/cli/__main__.py: Package Entry Point
# =============================================================================
#
# `python -m festival_pulse.cli` runs the sync CLI, the scheduled job's
# entry point. For curated catalogs run the enrich module directly:
#     python -m festival_pulse.cli.enrich config/curated_example.yaml
# =============================================================================

"""Allow ``python -m festival_pulse.cli`` execution."""

import sys

from festival_pulse.cli.sync import main

sys.exit(main())
