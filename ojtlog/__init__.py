"""Work-hour logging service for on-the-job training.

Users record one entry per work day (time in/out, tasks, learnings) and track
accumulated hours against a target. The pieces, bottom-up:

* ``services.timecalc`` turns two clock strings into hours worked, minus the
  midday break;
* ``crud.logs.LogStore`` reads and writes the ``ojt_logs`` table;
* ``services.log_repository.LogRepository`` scopes everything to the current
  user, derives ``total_hours`` and caches list pages;
* ``main.create_app`` exposes it all over HTTP.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
