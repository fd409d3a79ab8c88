"""Team Balance API.

This service provides APIs for team bots to:
- Claim the oldest pending withdrawal of their team
- Report a claimed withdrawal as completed or failed
- Create withdrawals against a website balance
- List their transactions and websites
"""

__version__ = "0.1.0"
