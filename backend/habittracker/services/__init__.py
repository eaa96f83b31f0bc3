# Services package init
"""
Habit Tracker Backend — Services Layer
=======================================

Service Inventory:
    - HabitStore:   find/insert/update/delete primitives over the habits table
    - HabitService: the API operations, built on a HabitStore

Services know nothing about HTTP; routes translate their results and
exceptions into responses.
"""
