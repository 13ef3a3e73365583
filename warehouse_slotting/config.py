import os
import configparser
from pathlib import Path

class Config:
    """Configuration manager for the Warehouse Slotting System."""

    _instance = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return

        self._config_dir = Path(os.environ.get('SLOTTING_CONFIG_DIR', 'config'))
        self._config_path = self._config_dir / 'settings.ini'
        self._config = configparser.ConfigParser(interpolation=None)

        # Create config directory if it doesn't exist
        if not self._config_dir.exists():
            self._config_dir.mkdir(parents=True)

        # Load config or create default
        if self._config_path.exists():
            self._config.read(self._config_path)
        else:
            self._create_default_config()

        self._initialized = True

    def _create_default_config(self):
        """Create default configuration file."""
        self._config['DATABASE'] = {
            'url': 'sqlite:///slotting.db',
            'echo': 'False'
        }

        self._config['LOGGING'] = {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'directory': 'logs',
            'max_size_mb': '10',
            'backup_count': '5',
            'console_output': 'True'
        }

        self._config['ANALYSIS'] = {
            'analysis_horizon_days': '90',
            'include_dead_stock': 'False',
            'min_velocity_threshold': '0',
            'abc_method': 'threshold',  # threshold or pareto
            'max_workers': '4',
            'timeout_seconds': '0',     # 0 disables the deadline
            'high_velocity_demand': '20',
            'medium_velocity_demand': '5'
        }

        self._config['SCORING_WEIGHTS'] = {
            'velocity': '0.40',
            'abc_class': '0.25',
            'pick_frequency': '0.20',
            'space_efficiency': '0.10',
            'ergonomics': '0.05'
        }

        self._config['COSTS'] = {
            'picker_hourly_rate': '50',
            'forklift_hourly_rate': '75',
            'move_cost_per_pallet': '25',
            'pick_minutes_per_meter': '0.02',
            'move_minutes_per_meter': '0.5',
            'move_setup_minutes': '15',
            'default_move_quantity': '100',
            'net_benefit_priority_threshold': '5000',
            'payback_priority_days': '30'
        }

        self._config['SIMULATION'] = {
            'average_pick_time': '2.5',        # minutes per line
            'average_travel_distance': '45',   # meters per pick
            'space_utilization': '72',
            'productivity_rate': '85',         # lines per hour
            'annual_picks': '500000',
            'total_moves': '250',
            'moves_per_day': '50',
            'space_utilization_gain': '15'
        }

        self._config['ANALYZERS'] = {
            'golden_zone_priority': '95',
            'seasonal_priority': '75',
            'seasonal_lead_days': '7',
            'seasonal_revert_months': '3',
            'seasonal_min_index': '1.2',
            'seasonal_history_days': '365',
            'family_min_co_occurrence': '2',
            'family_max_pick_time_reduction': '12',
            'family_max_walk_time_reduction': '25',
            'consolidation_threshold': '50',
            'double_deep_threshold': '90',
            'double_deep_gain_factor': '0.5'
        }

        self._save_config()

    def _save_config(self):
        """Save configuration to file."""
        with open(self._config_path, 'w') as configfile:
            self._config.write(configfile)

    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def set(self, section, key, value):
        """Set configuration value."""
        if not self._config.has_section(section):
            self._config.add_section(section)

        self._config.set(section, key, str(value))
        self._save_config()

    def get_db_url(self):
        """Get SQLAlchemy database URL."""
        return self.get('DATABASE', 'url', 'sqlite:///slotting.db')

    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True)
        }

    @property
    def analysis_config(self):
        """Get analysis run configuration."""
        return {
            'analysis_horizon_days': self.get_int('ANALYSIS', 'analysis_horizon_days', 90),
            'include_dead_stock': self.get_boolean('ANALYSIS', 'include_dead_stock', False),
            'min_velocity_threshold': self.get_float('ANALYSIS', 'min_velocity_threshold', 0.0),
            'abc_method': self.get('ANALYSIS', 'abc_method', 'threshold'),
            'max_workers': self.get_int('ANALYSIS', 'max_workers', 4),
            'timeout_seconds': self.get_float('ANALYSIS', 'timeout_seconds', 0.0),
            'high_velocity_demand': self.get_float('ANALYSIS', 'high_velocity_demand', 20.0),
            'medium_velocity_demand': self.get_float('ANALYSIS', 'medium_velocity_demand', 5.0)
        }

    @property
    def scoring_weights(self):
        """Get scoring weights."""
        return {
            'velocity': self.get_float('SCORING_WEIGHTS', 'velocity', 0.40),
            'abc_class': self.get_float('SCORING_WEIGHTS', 'abc_class', 0.25),
            'pick_frequency': self.get_float('SCORING_WEIGHTS', 'pick_frequency', 0.20),
            'space_efficiency': self.get_float('SCORING_WEIGHTS', 'space_efficiency', 0.10),
            'ergonomics': self.get_float('SCORING_WEIGHTS', 'ergonomics', 0.05)
        }

    @property
    def cost_parameters(self):
        """Get labour and move cost parameters."""
        return {
            'picker_hourly_rate': self.get_float('COSTS', 'picker_hourly_rate', 50.0),
            'forklift_hourly_rate': self.get_float('COSTS', 'forklift_hourly_rate', 75.0),
            'move_cost_per_pallet': self.get_float('COSTS', 'move_cost_per_pallet', 25.0),
            'pick_minutes_per_meter': self.get_float('COSTS', 'pick_minutes_per_meter', 0.02),
            'move_minutes_per_meter': self.get_float('COSTS', 'move_minutes_per_meter', 0.5),
            'move_setup_minutes': self.get_float('COSTS', 'move_setup_minutes', 15.0),
            'default_move_quantity': self.get_int('COSTS', 'default_move_quantity', 100),
            'net_benefit_priority_threshold': self.get_float('COSTS', 'net_benefit_priority_threshold', 5000.0),
            'payback_priority_days': self.get_float('COSTS', 'payback_priority_days', 30.0)
        }

    @property
    def simulation_config(self):
        """Get simulation baseline and planning configuration."""
        return {
            'average_pick_time': self.get_float('SIMULATION', 'average_pick_time', 2.5),
            'average_travel_distance': self.get_float('SIMULATION', 'average_travel_distance', 45.0),
            'space_utilization': self.get_float('SIMULATION', 'space_utilization', 72.0),
            'productivity_rate': self.get_float('SIMULATION', 'productivity_rate', 85.0),
            'annual_picks': self.get_int('SIMULATION', 'annual_picks', 500000),
            'total_moves': self.get_int('SIMULATION', 'total_moves', 250),
            'moves_per_day': self.get_int('SIMULATION', 'moves_per_day', 50),
            'space_utilization_gain': self.get_float('SIMULATION', 'space_utilization_gain', 15.0)
        }

    @property
    def analyzer_config(self):
        """Get specialized analyzer configuration."""
        return {
            'golden_zone_priority': self.get_int('ANALYZERS', 'golden_zone_priority', 95),
            'seasonal_priority': self.get_int('ANALYZERS', 'seasonal_priority', 75),
            'seasonal_lead_days': self.get_int('ANALYZERS', 'seasonal_lead_days', 7),
            'seasonal_revert_months': self.get_int('ANALYZERS', 'seasonal_revert_months', 3),
            'seasonal_min_index': self.get_float('ANALYZERS', 'seasonal_min_index', 1.2),
            'seasonal_history_days': self.get_int('ANALYZERS', 'seasonal_history_days', 365),
            'family_min_co_occurrence': self.get_int('ANALYZERS', 'family_min_co_occurrence', 2),
            'family_max_pick_time_reduction': self.get_float('ANALYZERS', 'family_max_pick_time_reduction', 12.0),
            'family_max_walk_time_reduction': self.get_float('ANALYZERS', 'family_max_walk_time_reduction', 25.0),
            'consolidation_threshold': self.get_float('ANALYZERS', 'consolidation_threshold', 50.0),
            'double_deep_threshold': self.get_float('ANALYZERS', 'double_deep_threshold', 90.0),
            'double_deep_gain_factor': self.get_float('ANALYZERS', 'double_deep_gain_factor', 0.5)
        }

# Global config instance
config = Config()
