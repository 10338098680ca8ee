# graphing_manager.py

import os
import matplotlib.pyplot as plt
import logger as log
import constants as C

class GraphingManager:
    """
    Turns the world's statistics series into charts after the simulation ends.
    """
    def __init__(self, output_dir=C.CHART_OUTPUT_DIR):
        self.output_dir = output_dir
        log.log("GraphingManager initialized.")

    def has_data(self, statistics):
        return len(statistics.data['producers']) > 0

    def _save(self, fig, file_name, description):
        file_path = os.path.join(self.output_dir, file_name)
        try:
            fig.savefig(file_path)
            log.log(f"[GraphingManager] {description} graph saved to {file_path}")
            return file_path
        except OSError as e:
            log.log(f"[GraphingManager] ERROR: Could not save {description.lower()} graph. Reason: {e}")
            return None
        finally:
            plt.close(fig)

    def generate_and_save_population_graph(self, statistics):
        """Line graph of every trophic group over the recorded samples."""
        data = statistics.data
        log.log(f"[GraphingManager] Generating population plot with {len(data['producers'])} data points...")
        samples = range(len(data['producers']))

        fig, ax = plt.subplots(figsize=(12, 7))
        ax.plot(samples, data['producers'], label='Producers', color='tab:green')
        ax.plot(samples, data['herbivores'], label='Herbivores', color='tab:olive')
        ax.plot(samples, data['carnivores'], label='Carnivores', color='tab:red')
        ax.plot(samples, data['omnivores'], label='Omnivores', color='tab:purple')
        ax.plot(samples, data['decomposers'], label='Decomposers', color='tab:brown')

        ax.set_title('Population Over Time')
        ax.set_xlabel('Sample (Simulation Days)')
        ax.set_ylabel('Living Organisms')
        ax.grid(True, which='both', linestyle='--', linewidth=0.5)
        ax.legend()
        fig.tight_layout()

        return self._save(fig, 'population_graph.png', 'Population')

    def generate_and_save_ecology_graph(self, statistics):
        """
        Biodiversity and stability on the left axis, total nutrients on the right.
        """
        data = statistics.data
        log.log("[GraphingManager] Generating ecology plot...")
        samples = range(len(data['producers']))

        fig, ax1 = plt.subplots(figsize=(12, 7))
        ax1.set_title('Ecosystem Health Over Time')
        ax1.set_xlabel('Sample (Simulation Days)')
        ax1.grid(True, which='both', linestyle='--', linewidth=0.5)

        # --- Plot 1: Indices on the left axis (ax1) ---
        ax1.set_ylabel('Index')
        line1, = ax1.plot(samples, data['biodiversity_index'], color='tab:blue', label='Biodiversity')
        line2, = ax1.plot(samples, data['stability_index'], color='tab:orange', label='Stability')

        # --- Plot 2: Nutrients on the right axis (ax2) ---
        ax2 = ax1.twinx()
        ax2.set_ylabel('Total Nutrients', color='tab:brown')
        line3, = ax2.plot(samples, data['total_nutrients'], color='tab:brown', label='Total Nutrients')
        ax2.tick_params(axis='y', labelcolor='tab:brown')

        ax1.legend(handles=[line1, line2, line3], loc='upper left')
        fig.tight_layout()

        return self._save(fig, 'ecology_graph.png', 'Ecology')

    def generate_and_save_climate_graph(self, statistics):
        data = statistics.data
        log.log("[GraphingManager] Generating climate plot...")
        samples = range(len(data['producers']))

        fig, ax = plt.subplots(figsize=(12, 7))
        ax.plot(samples, data['average_temperature'], label='Temperature (C)', color='tab:red')
        ax.plot(samples, data['average_rainfall'], label='Rainfall (%)', color='tab:blue')
        ax.set_title('Climate Over Time')
        ax.set_xlabel('Sample (Simulation Days)')
        ax.grid(True, which='both', linestyle='--', linewidth=0.5)
        ax.legend()
        fig.tight_layout()

        return self._save(fig, 'climate_graph.png', 'Climate')

    def generate_and_save_graphs(self, statistics, output_dir=None):
        """
        Generates and saves all configured graphs if data exists. Returns the
        paths that were written.
        """
        if output_dir is not None:
            self.output_dir = output_dir
        if not self.has_data(statistics):
            log.log("[GraphingManager] No data collected, skipping plot generation.")
            return []

        os.makedirs(self.output_dir, exist_ok=True)
        paths = [
            self.generate_and_save_population_graph(statistics),
            self.generate_and_save_ecology_graph(statistics),
            self.generate_and_save_climate_graph(statistics),
        ]
        return [path for path in paths if path is not None]
