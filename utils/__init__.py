"""
utils package
-------------

Shared helpers for the class scheduler: studio constants loaded from
config/constants.json, the 15-minute time grid, input checks at the API
boundary, logging setup, and the request/insight helpers under `helpers`.
"""
