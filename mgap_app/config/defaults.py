"""Default configuration parameters for the momentum gap strategy."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GapParams:
    """Gap band scoring parameters."""
    gap_min: float = 0.3                 # Lower edge of the acceptable gap window (%)
    gap_max: float = 3.0                 # Upper edge of the acceptable gap window (%)
    optimal_gap: float = 1.5             # Gap that earns full credit (%)
    max_points: float = 25.0
    decay_per_pct: float = 10.0          # Points lost per % away from optimal
    small_gap_points: float = 10.0       # Credit reached at gap_min from below


@dataclass(frozen=True)
class RelativeStrengthParams:
    """RS20 scoring parameters."""
    rs20_min: float = 4.0                # Full credit at or above
    rs20_partial_min: float = 2.0        # Partial credit floor
    max_points: float = 20.0


@dataclass(frozen=True)
class VolumeParams:
    """Volume surge scoring parameters."""
    vol_surge_min: float = 1.5           # Full band starts here
    vol_surge_full: float = 2.0          # Surge that reaches max_points
    vol_surge_floor: float = 1.0         # Partial band starts here
    max_points: float = 20.0
    partial_points: float = 10.0


@dataclass(frozen=True)
class NearHighParams:
    """52-week high proximity parameters."""
    bonus_points: float = 15.0
    high_ratio: float = 0.98             # Open within 2% of the 52W high


@dataclass(frozen=True)
class LiquidityParams:
    """Liquidity bucket parameters."""
    high_points: float = 10.0
    medium_points: float = 5.0
    high_volume: float = 1_000_000.0
    medium_volume: float = 500_000.0


@dataclass(frozen=True)
class ATRParams:
    """ATR quality band parameters (ATR as % of close)."""
    band_low_pct: float = 2.0
    band_high_pct: float = 5.0
    cutoff_pct: float = 10.0
    max_points: float = 10.0
    ramp_points: float = 5.0


@dataclass(frozen=True)
class TradeLevelParams:
    """Stop and target distance parameters."""
    stop_atr_mult: float = 1.5
    target_atr_mult: float = 2.5


@dataclass(frozen=True)
class SelectionParams:
    """Candidate selection parameters."""
    score_threshold: int = 60
    max_signals: int = 10


@dataclass(frozen=True)
class RunParams:
    """Run metadata parameters."""
    strategy_name: str = "intraday_momentum_gap"
    session: str = "PREOPEN"
    side: str = "BUY"


@dataclass(frozen=True)
class StrategyConfig:
    """Complete strategy configuration."""
    gap: GapParams
    relative_strength: RelativeStrengthParams
    volume: VolumeParams
    near_high: NearHighParams
    liquidity: LiquidityParams
    atr: ATRParams
    trade_levels: TradeLevelParams
    selection: SelectionParams
    run: RunParams


def get_default_config() -> StrategyConfig:
    """Get the default configuration instance."""
    return StrategyConfig(
        gap=GapParams(),
        relative_strength=RelativeStrengthParams(),
        volume=VolumeParams(),
        near_high=NearHighParams(),
        liquidity=LiquidityParams(),
        atr=ATRParams(),
        trade_levels=TradeLevelParams(),
        selection=SelectionParams(),
        run=RunParams(),
    )
