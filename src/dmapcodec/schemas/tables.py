"""Field tables for the fixed DMAP formats.

Each table lists the fields a format requires, the fields it allows but
does not require, and groups of arrays that must share one shape. The
tables are plain data; validator.py interprets them.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from ..types import TypeCode

CHAR = TypeCode.CHAR
SHORT = TypeCode.SHORT
INT = TypeCode.INT
FLOAT = TypeCode.FLOAT
DOUBLE = TypeCode.DOUBLE
STRING = TypeCode.STRING


class FormatSchema(str, enum.Enum):
    """Named record formats, plus GENERIC which imposes no requirements."""

    IQDAT = "iqdat"
    RAWACF = "rawacf"
    FITACF = "fitacf"
    GRID = "grid"
    MAP = "map"
    SND = "snd"
    GENERIC = "generic"


@dataclass(frozen=True)
class FieldSpec:
    """Expected type and shape class of one field.

    Attributes:
        name: Field name
        code: Required element type code
        rank: 0 for a scalar, the number of dimensions for an array, or
            None for an array of any rank
    """

    name: str
    code: TypeCode
    rank: Optional[int] = 0

    @property
    def is_array(self) -> bool:
        return self.rank != 0

    def describe(self) -> str:
        if not self.is_array:
            return self.code.name
        if self.rank is None:
            return f"{self.code.name} array"
        return f"{self.code.name} array of rank {self.rank}"


@dataclass(frozen=True)
class SchemaTable:
    """Declarative field requirements of one format."""

    schema: FormatSchema
    required: tuple[FieldSpec, ...] = ()
    optional: tuple[FieldSpec, ...] = ()
    matched: tuple[tuple[str, ...], ...] = ()

    def spec(self, name: str) -> Optional[FieldSpec]:
        """Return the FieldSpec for ``name``, or None for a field the table does not list."""
        for spec in self.required + self.optional:
            if spec.name == name:
                return spec
        return None

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.required + self.optional)


def _scalars(code: TypeCode, *names: str) -> tuple[FieldSpec, ...]:
    return tuple(FieldSpec(name, code, 0) for name in names)


def _arrays(code: TypeCode, *names: str, rank: Optional[int] = 1) -> tuple[FieldSpec, ...]:
    return tuple(FieldSpec(name, code, rank) for name in names)


_TIME_SPAN = (
    *_scalars(SHORT, "start.year", "start.month", "start.day", "start.hour", "start.minute"),
    *_scalars(DOUBLE, "start.second"),
    *_scalars(SHORT, "end.year", "end.month", "end.day", "end.hour", "end.minute"),
    *_scalars(DOUBLE, "end.second"),
)

# Radar parameter block shared by IQDAT, RAWACF and FITACF.
_RADAR_PARAMETERS = (
    *_scalars(CHAR, "radar.revision.major", "radar.revision.minor", "origin.code"),
    *_scalars(STRING, "origin.time", "origin.command"),
    *_scalars(SHORT, "cp", "stid"),
        *_scalars(SHORT, "time.yr", "time.mo", "time.dy", "time.hr", "time.mt", "time.sc"),
    *_scalars(INT, "time.us"),
    *_scalars(SHORT, "txpow", "nave", "atten", "lagfr", "smsep", "ercod"),
    *_scalars(SHORT, "stat.agc", "stat.lopwr"),
    *_scalars(FLOAT, "noise.search", "noise.mean"),
    *_scalars(SHORT, "channel", "bmnum"),
    *_scalars(FLOAT, "bmazm"),
    *_scalars(SHORT, "scan", "offset", "rxrise", "intt.sc"),
    *_scalars(INT, "intt.us"),
    *_scalars(SHORT, "txpl", "mpinc", "mppul", "mplgs", "nrang", "frang", "rsep", "xcf", "tfreq"),
    *_scalars(INT, "mxpwr", "lvmax"),
    *_scalars(STRING, "combf"),
)

_PULSE_TABLES = (
    FieldSpec("ptab", SHORT, 1),
    FieldSpec("ltab", SHORT, 2),
)

_IQDAT = SchemaTable(
    FormatSchema.IQDAT,
    required=(
        *_RADAR_PARAMETERS,
        *_scalars(INT, "iqdata.revision.major", "iqdata.revision.minor"),
        *_scalars(INT, "seqnum", "chnnum", "smpnum", "skpnum"),
        *_PULSE_TABLES,
        *_arrays(INT, "tsc", "tus"),
        *_arrays(SHORT, "tatten"),
        *_arrays(FLOAT, "tnoise"),
        *_arrays(INT, "toff", "tsze"),
        FieldSpec("data", SHORT, None),
    ),
    optional=_scalars(SHORT, "mplgexs", "ifmode"),
    matched=(("tsc", "tus", "tatten", "tnoise", "toff", "tsze"),),
)

_RAWACF = SchemaTable(
    FormatSchema.RAWACF,
    required=(
        *_RADAR_PARAMETERS,
        *_scalars(INT, "rawacf.revision.major", "rawacf.revision.minor"),
        *_scalars(FLOAT, "thr"),
        *_PULSE_TABLES,
        *_arrays(FLOAT, "pwr0"),
        *_arrays(SHORT, "slist"),
        *_arrays(FLOAT, "acfd", rank=3),
    ),
    optional=(
        *_scalars(SHORT, "mplgexs", "ifmode"),
        *_arrays(FLOAT, "xcfd", rank=3),
    ),
)

_FITACF = SchemaTable(
    FormatSchema.FITACF,
    required=(
        *_RADAR_PARAMETERS,
        *_scalars(INT, "fitacf.revision.major", "fitacf.revision.minor"),
        *_scalars(FLOAT, "noise.sky", "noise.lag0", "noise.vel"),
        *_PULSE_TABLES,
        *_arrays(FLOAT, "pwr0"),
        *_arrays(SHORT, "slist", "nlag"),
        *_arrays(CHAR, "qflg", "gflg"),
        *_arrays(FLOAT, "p_l", "p_l_e", "p_s", "p_s_e", "v", "v_e"),
        *_arrays(FLOAT, "w_l", "w_l_e", "w_s", "w_s_e", "sd_l", "sd_s", "sd_phi"),
    ),
    optional=(
        *_scalars(SHORT, "mplgexs", "ifmode"),
        *_scalars(STRING, "algorithm"),
        *_scalars(FLOAT, "tdiff"),
        *_arrays(CHAR, "x_qflg", "x_gflg"),
        *_arrays(FLOAT, "x_p_l", "x_p_l_e", "x_p_s", "x_p_s_e", "x_v", "x_v_e"),
        *_arrays(FLOAT, "x_w_l", "x_w_l_e", "x_w_s", "x_w_s_e"),
        *_arrays(FLOAT, "phi0", "phi0_e", "elv", "elv_fitted", "elv_error", "elv_low", "elv_high"),
        *_arrays(FLOAT, "x_sd_l", "x_sd_s", "x_sd_phi"),
    ),
)

_GRID_VECTORS = (
    *_arrays(SHORT, "stid", "channel", "nvec"),
    *_arrays(FLOAT, "freq"),
    *_arrays(SHORT, "major.revision", "minor.revision", "program.id"),
    *_arrays(FLOAT, "noise.mean", "noise.sd"),
    *_arrays(SHORT, "gsct"),
    *_arrays(FLOAT, "v.min", "v.max", "p.min", "p.max", "w.min", "w.max", "ve.min", "ve.max"),
    *_arrays(FLOAT, "vector.mlat", "vector.mlon", "vector.kvect"),
    *_arrays(SHORT, "vector.stid", "vector.channel"),
    *_arrays(INT, "vector.index"),
    *_arrays(FLOAT, "vector.vel.median", "vector.vel.sd"),
)

_GRID_EXTRAS = _arrays(
    FLOAT, "vector.pwr.median", "vector.pwr.sd", "vector.wdt.median", "vector.wdt.sd"
)

_GRID = SchemaTable(
    FormatSchema.GRID,
    required=(*_TIME_SPAN, *_GRID_VECTORS),
    optional=_GRID_EXTRAS,
)

_MAP = SchemaTable(
    FormatSchema.MAP,
    required=(
        *_TIME_SPAN,
        *_scalars(SHORT, "map.major.revision", "map.minor.revision"),
        *_scalars(SHORT, "doping.level", "model.wt", "error.wt", "IMF.flag", "hemisphere"),
        *_scalars(SHORT, "fit.order"),
        *_scalars(FLOAT, "latmin"),
        *_scalars(DOUBLE, "chi.sqr", "chi.sqr.dat", "rms.err"),
        *_scalars(FLOAT, "lon.shft", "lat.shft"),
        *_scalars(DOUBLE, "mlt.start", "mlt.end", "mlt.av"),
        *_scalars(DOUBLE, "pot.drop", "pot.drop.err", "pot.max", "pot.max.err"),
        *_scalars(DOUBLE, "pot.min", "pot.min.err"),
        *_GRID_VECTORS,
    ),
    optional=(
        *_scalars(STRING, "source"),
        *_scalars(SHORT, "IMF.delay"),
        *_scalars(DOUBLE, "IMF.Bx", "IMF.By", "IMF.Bz", "IMF.Vx", "IMF.tilt", "IMF.Kp"),
        *_scalars(STRING, "model.angle", "model.level", "model.tilt", "model.name"),
        *_scalars(SHORT, "noigrf"),
        *_GRID_EXTRAS,
        *_arrays(DOUBLE, "N", "N+1", "N+2", "N+3"),
        *_arrays(FLOAT, "model.mlat", "model.mlon", "model.kvect", "model.vel.median"),
        *_arrays(FLOAT, "boundary.mlat", "boundary.mlon"),
    ),
)

_SND = SchemaTable(
    FormatSchema.SND,
    required=(
        *_scalars(CHAR, "radar.revision.major", "radar.revision.minor", "origin.code"),
        *_scalars(STRING, "origin.time", "origin.command"),
        *_scalars(SHORT, "cp", "stid"),
        *_scalars(SHORT, "time.yr", "time.mo", "time.dy", "time.hr", "time.mt", "time.sc"),
        *_scalars(INT, "time.us"),
        *_scalars(SHORT, "nave", "lagfr", "smsep"),
        *_scalars(FLOAT, "noise.search", "noise.mean"),
        *_scalars(SHORT, "channel", "bmnum"),
        *_scalars(FLOAT, "bmazm"),
        *_scalars(SHORT, "scan", "rxrise", "intt.sc"),
        *_scalars(INT, "intt.us"),
        *_scalars(SHORT, "nrang", "frang", "rsep", "xcf", "tfreq"),
        *_scalars(FLOAT, "noise.sky"),
        *_scalars(STRING, "combf"),
        *_scalars(INT, "fitacf.revision.major", "fitacf.revision.minor"),
        *_scalars(SHORT, "snd.revision.major", "snd.revision.minor"),
        *_arrays(SHORT, "slist"),
        *_arrays(CHAR, "qflg", "gflg"),
        *_arrays(FLOAT, "v", "v_e", "p_l", "w_l"),
    ),
    optional=(
        *_arrays(CHAR, "x_qflg"),
        *_arrays(FLOAT, "phi0", "phi0_e"),
    ),
)

SCHEMAS: dict[FormatSchema, SchemaTable] = {
    FormatSchema.IQDAT: _IQDAT,
    FormatSchema.RAWACF: _RAWACF,
    FormatSchema.FITACF: _FITACF,
    FormatSchema.GRID: _GRID,
    FormatSchema.MAP: _MAP,
    FormatSchema.SND: _SND,
    FormatSchema.GENERIC: SchemaTable(FormatSchema.GENERIC),
}
