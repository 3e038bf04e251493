# -*- coding: utf-8 -*-
"""Module entry point for `python -m fontidentifier.gui`."""

from __future__ import annotations

from fontidentifier.main import main


if __name__ == "__main__":
    raise SystemExit(main())
