'''
Session Voting Backend: weekly time-slot voting for a recurring group session.
'''
__version__ = "1.0.0"
