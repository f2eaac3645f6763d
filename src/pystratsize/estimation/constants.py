"""
Constants for sample size calculation.

Column names used in the result table and the neutral values substituted
for optional inputs.
"""

# Stratum column name when the caller passes an unnamed sequence
DEFAULT_STRATUM_COL = "H"

# Result columns, in output order after the stratum key
VARIABLE_COL = "variable"
ESTIM_COL = "estim"
DEFFH_COL = "deffh"
S2H_COL = "s2h"
CVH_COL = "CVh"
RH_COL = "Rh"
POPH_COL = "poph"
NH_COL = "nh"

RESULT_COLUMNS = (
    VARIABLE_COL,
    ESTIM_COL,
    DEFFH_COL,
    S2H_COL,
    CVH_COL,
    RH_COL,
    POPH_COL,
    NH_COL,
)

# Full response
DEFAULT_RESPONSE_RATE = 1.0
# Simple random sampling
DEFAULT_DESIGN_EFFECT = 1.0

# CVh is given in percent
CV_PERCENT_SCALE = 100.0
