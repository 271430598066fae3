"""Interrogation script fed to the target interpreter over stdin (stdlib only, must run on any python 3)."""

import json
import sys


def _main():
    info = {
        "base_exec_prefix": getattr(sys, "base_exec_prefix", sys.exec_prefix),
        "base_prefix": getattr(sys, "base_prefix", sys.prefix),
        "major": sys.version_info[0],
        "minor": sys.version_info[1],
        "python_version": ".".join(str(i) for i in sys.version_info),
    }
    sys.stdout.write(json.dumps(info))
    sys.stdout.flush()


if __name__ == "__main__":
    _main()
