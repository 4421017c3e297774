"""hmmforge logger.

This module provides the main logger instance for the hmmforge package.
It configures Python's warnings system to be captured by the logging system
and creates a logger instance named "hmmforge" for use throughout the package.
"""

import logging

# Warnings issued through the warnings module are redirected to the logging system.
logging.captureWarnings(True)

# Main logger instance for the hmmforge package.
# It can be imported and used directly: `from hmmforge.logger import HMMFORGE_LOGGER`
HMMFORGE_LOGGER: logging.Logger = logging.getLogger("hmmforge")
