"""Entry point for SaverBot: python -m saverbot [--size SIZE] [--goal GOAL] [--ticks TICKS] ..."""

import sys

from .agent.core import AgentState, SaverAgent
from .config import load_config
from .errors import SaverBotError
from .logging_config import get_logger, log_metrics, setup_logging
from .persistence import load_state, save_state
from .world.grid import SaverWorld


def main(argv=None):
    # Parse args
    size = 30
    goal = None
    seed = None
    ticks = 500
    recharge = 40
    config_path = "saverbot.yaml"
    save_path = None
    load_path = None
    runs_dir = None
    show_map = False

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        if args[i] == "--size" and i + 1 < len(args):
            size = int(args[i + 1])
            i += 2
        elif args[i] == "--goal" and i + 1 < len(args):
            goal = int(args[i + 1])
            i += 2
        elif args[i] == "--seed" and i + 1 < len(args):
            seed = int(args[i + 1])
            i += 2
        elif args[i] == "--ticks" and i + 1 < len(args):
            ticks = int(args[i + 1])
            i += 2
        elif args[i] == "--recharge" and i + 1 < len(args):
            recharge = int(args[i + 1])
            i += 2
        elif args[i] == "--config" and i + 1 < len(args):
            config_path = args[i + 1]
            i += 2
        elif args[i] == "--save" and i + 1 < len(args):
            save_path = args[i + 1]
            i += 2
        elif args[i] == "--load" and i + 1 < len(args):
            load_path = args[i + 1]
            i += 2
        elif args[i] == "--runs" and i + 1 < len(args):
            runs_dir = args[i + 1]
            i += 2
        elif args[i] == "--map":
            show_map = True
            i += 1
        else:
            i += 1

    setup_logging(runs_dir)
    logger = get_logger()

    try:
        config = load_config(config_path)
    except SaverBotError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    if goal is not None:
        config.goal = goal
    if seed is not None:
        config.seed = seed

    print(f"  SaverBot")
    print(f"  World: {size}x{size}  Goal: {config.goal}  Ticks: {ticks}")

    world = SaverWorld(size=size, seed=config.seed, window=config.vicinity_size)
    agent = SaverAgent(world, config, event_sink=lambda s: log_metrics(s["tick"], s))

    if load_path:
        try:
            load_state(load_path, agent)
            print(f"  Loaded state from {load_path}")
        except (OSError, ValueError, KeyError) as e:
            print(f"  Failed to load state: {e}")

    for _ in range(ticks):
        world.tick()
        world.recharge(recharge)
        for event in world.events:
            agent.handle_event(event)
        agent.tick()
        if agent.state == AgentState.ENJOYING:
            logger.info(f"Enjoying after {agent.total_ticks} ticks")
            break

    if show_map:
        print(world.render_ascii())

    print(f"  State: {agent.state.value}  Saved: {agent.saved}  "
          f"Banks: {len(agent.memory.free())} free / {len(agent.memory.filled())} filled")

    if save_path:
        try:
            save_state(agent, save_path)
            print(f"  State saved to {save_path}")
        except OSError as e:
            print(f"  Failed to save state: {e}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
