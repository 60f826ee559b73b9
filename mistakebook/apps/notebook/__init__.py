"""
The mistake notebook: questions a student got wrong, their knowledge tags and
their review schedule.
"""
