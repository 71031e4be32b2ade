"""
hrm_core — HRM attendance client core
=====================================
Architecture: one shared requests.Session, one DomainClient per backend
sub-path, Ok/Err results everywhere, route protection on every navigation.

  constants.py    → Version, timeouts, backend paths, keys, routes, messages
  config.py       → Paths, logging, AppConfig load/save, safe_print
  models.py       → Dataclasses: tokens, profile, snapshot, ApiError, Ok/Err
  errors.py       → Error classifier, should_retry, ErrorReporter
  notifier.py     → Snackbar sink (log / recording)
  storage.py      → Key-value stores + SessionStorage
  network.py      → NetworkMonitor (reachability state + TCP probe)
  http_client.py  → Session with retry/pooling, DomainClient, ClientFactory
  api.py          → Auth / attendance / user / notifications / push APIs
  navigation.py   → StackNavigator
  state.py        → SessionState (the authentication flag)
  background.py   → best_effort() for fire-and-forget sub-steps
  push.py         → PushTokenService (register / revoke / taps)
  session.py      → SessionOrchestrator (bootstrap, login, logout, guard)
  validators.py   → Input validation
  attendance.py   → AttendanceService, LeaveService
  profile.py      → ProfileService
  app.py          → HrmApp composition root
  runner.py       → CLI main()
"""
