"""
config.py: tunable constants for the store growth-curve engine.

Every module (mask, shocks, objective, selection, seasonality, residuals,
global_stats, analyzer, pipeline) reads its thresholds from here. Values are
expressed in the units of the input series (thousand JPY for sales).
"""


# ==============================================================================
# STORE TIERS (by valid-month count)
# ==============================================================================
MATURE_MIN_MONTHS = 36   # "anchor" stores, feed global statistics
GROWTH_MIN_MONTHS = 13   # below this a store is fitted with the startup model

# A store is active if its last observation is within this many days of the
# batch's latest observation.
ACTIVE_WINDOW_DAYS = 60


# ==============================================================================
# VALIDITY MASK (IQR + recent-months rescue)
# ==============================================================================
IQR_MULTIPLIER = 1.5
RESCUE_LOOKBACK_MONTHS = 24   # rescue pass only runs over the most recent months
RESCUE_MA_WINDOW = 12         # trailing moving-average window
RESCUE_MIN_POINTS = 6         # contributing valid months required
RESCUE_TOLERANCE = 0.11       # ±11% of the moving average


# ==============================================================================
# SHOCK DETECTION
# ==============================================================================
SHOCK_MIN_SERIES_MONTHS = 24
SHOCK_EDGE_MARGIN = 6         # months required on both sides of a candidate
SHOCK_WINDOW = 3              # pre/post window length
SHOCK_MIN_WINDOW_POINTS = 2   # valid points required inside each window
SHOCK_MIN_RATIO = 0.15        # relative pre/post divergence

PANDEMIC_YEAR = 2020
PANDEMIC_MONTHS = (3, 4, 5)
PANDEMIC_MIN_SIDE_MONTHS = 5


# ==============================================================================
# PHYSICAL LIMITS & OBJECTIVE WEIGHTS
# ==============================================================================
K_MIN = 0.0001
K_MAX = 2.0
ABSOLUTE_MAX_CAPACITY = 10_000.0    # hard ceiling for base + L
RARE_CAPACITY_THRESHOLD = 5_000.0   # rare but possible
RARE_CAPACITY_PENALTY = 0.1
SENTINEL_COST = 1e15

VARIANCE_MIN = 100.0           # below this the variance estimate is replaced
VARIANCE_FALLBACK_SHARE = 0.01  # ... by share * max_val^2

CAPACITY_RATIO_LIMIT = 1.2     # L penalty starts above 1.2x observed max
CAPACITY_PENALTY = 0.1
GROWTH_RATE_PENALTY = 0.05
SHIFT_PENALTY = 0.1


# ==============================================================================
# NELDER-MEAD SIMPLEX
# ==============================================================================
SIMPLEX_STEP = 0.05
SIMPLEX_ZERO_STEP = 0.001
SIMPLEX_MAX_ITER = 2000
SIMPLEX_TOL = 1e-6
SIMPLEX_RESTARTS = 2


# ==============================================================================
# MODEL SELECTION
# ==============================================================================
AIC_MARGIN = 2.5
SHIFT_MIN_MARGIN = 5          # months required on both sides of a used shock

INIT_GROWTH_RATE = 0.1
INIT_CAPACITY_FLOOR = 3_000.0
INIT_CAPACITY_SHARE = 0.2     # of observed max
STEP_SEED_CAPACITY_SHARE = 0.1

STARTUP_T0 = 12.0
BASE_POINTS = 3               # early valid points averaged into the base


# ==============================================================================
# RESIDUAL NUDGE
# ==============================================================================
NUDGE_SHORT_WINDOW = 3
NUDGE_LONG_WINDOW = 12
NUDGE_DECAY_STARTUP = 0.8
NUDGE_DECAY_DEFAULT = 0.7
NUDGE_DECAY_MAX = 0.9


# ==============================================================================
# GLOBAL STATISTICS
# ==============================================================================
GLOBAL_GROWTH_RATE_PERCENTILE = 65   # biased toward faster growers
GLOBAL_CAPACITY_PERCENTILE = 50
DEFAULT_GROWTH_RATE = 0.1
DEFAULT_CAPACITY = 3_000.0


# ==============================================================================
# SUMMARY ANALYTICS
# ==============================================================================
PARETO_A_SHARE = 0.70
PARETO_B_SHARE = 0.90


# ==============================================================================
# EXECUTION
# ==============================================================================
N_JOBS = 1   # joblib workers per phase; -1 = all cores
