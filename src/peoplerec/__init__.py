"""People-you-may-know recommendation service."""

from dotenv import load_dotenv

# Load environment variables from .env as early as possible so modules
# which read os.environ (API key, Elasticsearch URL, PYMK_* tunables) get
# the configured values.
load_dotenv()
