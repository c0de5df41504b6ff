import json
import os
import sys

with open(sys.argv[1], "w") as f:
    json.dump({k: v for k, v in os.environ.items() if k.startswith("MCP_CONDA_TEST_")}, f)
