"""Convenience shim to run the request listing without installing the package."""

from __future__ import annotations

import sys

from request_list.runner import main as request_list_main


if __name__ == "__main__":
    sys.exit(request_list_main(sys.argv[1:]))
