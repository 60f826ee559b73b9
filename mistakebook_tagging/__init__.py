"""
Knowledge tagging for Mistakebook: the curriculum tag tree of each subject.
"""
