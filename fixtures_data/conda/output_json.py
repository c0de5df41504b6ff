import json
import sys

with open(sys.argv[1], "w") as f:
    json.dump({"id": 0, "name": "test"}, f)
