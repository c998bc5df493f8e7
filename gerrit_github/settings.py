"""Settings for how the webhook should talk to GitHub."""

import os


GITHUB_PERSONAL_TOKEN = os.environ.get("GITHUB_PERSONAL_TOKEN", None)

# The GitHub REST API.
GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com")
