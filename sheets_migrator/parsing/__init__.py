"""
Parsing package.

values: cell text -> date / float / month label
mappers: raw sheet row -> typed record
"""
