"""Positional weight tables, one per game phase.

Tables are named by the number of discs on the board they were tuned for and
are symmetric under the board's eight reflections/rotations. Early tables put
almost everything on corner control; late tables flatten out toward raw disc
value as the game approaches exhaustive-search territory.
"""

from typing import Tuple

WeightTable = Tuple[int, ...]

WEIGHTS_8: WeightTable = (
       0,    0,     0,    0,    0,     0,    0,    0,
       0,    0, -1878, -582, -582, -1878,    0,    0,
       0, -1878, -152, -139, -139,  -152, -1878,   0,
       0, -582,  -139, -254, -254,  -139, -582,    0,
       0, -582,  -139, -254, -254,  -139, -582,    0,
       0, -1878, -152, -139, -139,  -152, -1878,   0,
       0,    0, -1878, -582, -582, -1878,    0,    0,
       0,    0,     0,    0,    0,     0,    0,    0,
)

WEIGHTS_16: WeightTable = (
     9188, -2397,   207,  -287,  -287,   207, -2397,  9188,
    -2397, -5560, -1314,  -999,  -999, -1314, -5560, -2397,
      207, -1314,  -457,  -378,  -378,  -457, -1314,   207,
     -287,  -999,  -378,  -374,  -374,  -378,  -999,  -287,
     -287,  -999,  -378,  -374,  -374,  -378,  -999,  -287,
      207, -1314,  -457,  -378,  -378,  -457, -1314,   207,
    -2397, -5560, -1314,  -999,  -999, -1314, -5560, -2397,
     9188, -2397,   207,  -287,  -287,   207, -2397,  9188,
)

WEIGHTS_24: WeightTable = (
     9628, -1524,   212,    26,    26,   212, -1524,  9628,
    -1524, -5020,  -975,  -764,  -764,  -975, -5020, -1524,
      212,  -975,  -371,  -310,  -310,  -371,  -975,   212,
       26,  -764,  -310,  -306,  -306,  -310,  -764,    26,
       26,  -764,  -310,  -306,  -306,  -310,  -764,    26,
      212,  -975,  -371,  -310,  -310,  -371,  -975,   212,
    -1524, -5020,  -975,  -764,  -764,  -975, -5020, -1524,
     9628, -1524,   212,    26,    26,   212, -1524,  9628,
)

WEIGHTS_32: WeightTable = (
     7484,  -539,    73,    34,    34,    73,  -539,  7484,
     -539, -3536,  -730,  -597,  -597,  -730, -3536,  -539,
       73,  -730,  -335,  -289,  -289,  -335,  -730,    73,
       34,  -597,  -289,  -223,  -223,  -289,  -597,    34,
       34,  -597,  -289,  -223,  -223,  -289,  -597,    34,
       73,  -730,  -335,  -289,  -289,  -335,  -730,    73,
     -539, -3536,  -730,  -597,  -597,  -730, -3536,  -539,
     7484,  -539,    73,    34,    34,    73,  -539,  7484,
)

WEIGHTS_40: WeightTable = (
     5145,   -61,    20,    40,    40,    20,   -61,  5145,
      -61, -1923,  -583,  -450,  -450,  -583, -1923,   -61,
       20,  -583,  -337,  -214,  -214,  -337,  -583,    20,
       40,  -450,  -214,  -140,  -140,  -214,  -450,    40,
       40,  -450,  -214,  -140,  -140,  -214,  -450,    40,
       20,  -583,  -337,  -214,  -214,  -337,  -583,    20,
      -61, -1923,  -583,  -450,  -450,  -583, -1923,   -61,
     5145,   -61,    20,    40,    40,    20,   -61,  5145,
)

WEIGHTS_48: WeightTable = (
     3539,   235,    17,    37,    37,    17,   235,  3539,
      235,  -882,  -465,  -257,  -257,  -465,  -882,   235,
       17,  -465,  -365,  -127,  -127,  -365,  -465,    17,
       37,  -257,  -127,  -105,  -105,  -127,  -257,    37,
       37,  -257,  -127,  -105,  -105,  -127,  -257,    37,
       17,  -465,  -365,  -127,  -127,  -365,  -465,    17,
      235,  -882,  -465,  -257,  -257,  -465,  -882,   235,
     3539,   235,    17,    37,    37,    17,   235,  3539,
)

WEIGHTS_56: WeightTable = (
     2379,   475,    36,    38,    38,    36,   475,  2379,
      475,  -277,  -316,   -82,   -82,  -316,  -277,   475,
       36,  -316,  -318,    14,    14,  -318,  -316,    36,
       38,   -82,    14,     5,     5,    14,   -82,    38,
       38,   -82,    14,     5,     5,    14,   -82,    38,
       36,  -316,  -318,    14,    14,  -318,  -316,    36,
      475,  -277,  -316,   -82,   -82,  -316,  -277,   475,
     2379,   475,    36,    38,    38,    36,   475,  2379,
)

WEIGHTS_64: WeightTable = (
     1332,   557,    43,    94,    94,    43,   557,  1332,
      557,    67,   -21,    99,    99,   -21,    67,   557,
       43,   -21,   -35,   270,   270,   -35,   -21,    43,
       94,    99,   270,   229,   229,   270,    99,    94,
       94,    99,   270,   229,   229,   270,    99,    94,
       43,   -21,   -35,   270,   270,   -35,   -21,    43,
      557,    67,   -21,    99,    99,   -21,    67,   557,
     1332,   557,    43,    94,    94,    43,   557,  1332,
)

# (minimum empty cells, table), most empties first
PHASE_BANDS: Tuple[Tuple[int, WeightTable], ...] = (
    (56, WEIGHTS_8),
    (48, WEIGHTS_16),
    (40, WEIGHTS_24),
    (32, WEIGHTS_32),
    (24, WEIGHTS_40),
    (16, WEIGHTS_48),
    (8, WEIGHTS_56),
    (0, WEIGHTS_64),
)


def weights_for(empty_count: int) -> WeightTable:
    """Pick the weight table for the phase given by ``empty_count``."""
    for min_empty, table in PHASE_BANDS:
        if empty_count >= min_empty:
            return table
    return WEIGHTS_64
