"""Contest constants: stat bounds, fitness weights, status labels."""

# Stat vector carried by every contestant
STAT_NAMES = ("strength", "agility", "intelligence", "deception", "luck")
STAT_MIN = 1
STAT_MAX = 10

# Fitness weights (higher fitness = better survival odds, lower payout).
# Deception only ever helps its holder.
FITNESS_WEIGHTS = {
    "strength": 1.2,
    "agility": 1.2,
    "intelligence": 1.3,
    "luck": 1.1,
    "deception": 0.8,
}

# Contestant status
STATUS_ALIVE = "alive"
STATUS_ELIMINATED = "eliminated"

# Bet status
BET_ACTIVE = "active"
BET_WON = "won"
BET_LOST = "lost"
BET_REFUNDED = "refunded"
BET_TERMINAL_STATUSES = frozenset({BET_WON, BET_LOST, BET_REFUNDED})

# Tolerance for float money comparisons in invariant checks
MONEY_EPSILON = 1e-6
