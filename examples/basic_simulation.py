"""
Basic circulation simulation example.

This example builds the single-chamber closed loop, prints the reduced ODE
system and runs a few beats with a custom afterload.
"""

from cardiocircuit import CircuitSimulation, Config


def main():
    """Run a basic single-chamber simulation."""

    print("Setting up single-chamber circulation...")

    # Create configuration
    config = Config()

    # Customize simulation parameters
    config.simulation.cycles = 8
    config.simulation.tau = 60.0 / 75.0
    config.chamber.tau_es = 0.25
    config.chamber.tau_ed = 0.38

    # Customize afterload
    config.systemic.R_s = 1.3
    config.output.output_dir = "basic_simulation_output"

    # Validate configuration
    warnings = config.validate()
    if warnings:
        print("Configuration warnings:")
        for warning in warnings:
            print(f"  - {warning}")
        return

    # Create and run simulation
    sim = CircuitSimulation(config)
    print(sim.system)

    print("\nRunning simulation...")
    results = sim.run(verbose=True)

    # Save results
    print("\nSaving results...")
    sim.save_results(results)

    # Generate plots
    print("Generating plots...")
    sim.plot_results(results)

    print("\nSimulation complete!")
    print(f"Results saved to: {config.output.output_dir}/")

    # Print some statistics
    metrics = results["metrics"]
    print(f"\nLast beat:")
    print(f"  EDV/ESV: {metrics['EDV_mL']:.0f}/{metrics['ESV_mL']:.0f} mL")
    print(f"  Cardiac output: {metrics['CO_L_min']:.2f} L/min")
    print(f"  MAP: {metrics['MAP_mmHg']:.0f} mmHg")


if __name__ == "__main__":
    main()
