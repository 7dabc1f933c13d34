import argparse, json
from .config import Config
from .runner import CircuitSimulation


def main(argv=None):
    p = argparse.ArgumentParser(description="Simulate a closed-loop single-ventricle circulation model.")
    p.add_argument("--config", default=None, help="YAML configuration file")
    p.add_argument("--beats", type=int, default=None)
    p.add_argument("--hr", type=float, default=None, help="Heart rate [bpm]")
    p.add_argument("--method", default=None,
                   help="solve_ivp method (LSODA, RK45, Radau, BDF, ...)")
    p.add_argument("--activation", choices=["shi", "double_hill"], default=None)
    p.add_argument("--outdir", default=None)
    p.add_argument("--si", action="store_true", help="Write SI units instead of mmHg/mL")
    p.add_argument("--no-plots", action="store_true")
    p.add_argument("--print-equations", action="store_true",
                   help="Print the reduced ODE system before integrating")
    p.add_argument("--quiet", action="store_true")
    args = p.parse_args(argv)

    config = Config.from_yaml(args.config) if args.config else Config()
    if args.beats is not None:
        config.simulation.cycles = args.beats
    if args.hr is not None:
        config.simulation.tau = 60.0 / args.hr
    if args.method is not None:
        config.simulation.method = args.method
    if args.activation is not None:
        config.chamber.activation = args.activation
    if args.outdir is not None:
        config.output.output_dir = args.outdir
    if args.si:
        config.output.si_units = True
    if args.no_plots:
        config.output.make_plots = False

    sim = CircuitSimulation(config)
    if args.print_equations:
        print(sim.system)
    results = sim.run(verbose=not args.quiet)

    outputs = sim.save_results(results)
    outputs["plots"] = sim.plot_results(results) if config.output.make_plots else []
    outputs["metrics"] = results["metrics"]
    print(json.dumps(outputs, indent=2))
    return outputs


if __name__ == "__main__":
    main()
