"""
TACT layer: product registry, wire-format parser, HTTP client, aggregator.

Submodules:
  registry    default product list and summary-based discovery
  parser      ``|``-delimited version/summary response decoding
  client      async HTTP client for the version service
  aggregator  concurrent fetch + parse into one ``Snapshot``
  errors      exception taxonomy shared by the modules above

Endpoint (override with WOWNOW_BASE_URL or ``--base-url``):
  http://us.patch.battle.net:1119/{product}/versions
"""
