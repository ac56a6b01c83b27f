"""
Simulates a fully associative cache using a trace file and either a write
through or write back policy.
The command line should be
sim [-h] [-d] <write policy> <trace file> [cache size] [block size]
where
• "write policy" is one of
    wt - simulate a write through cache
    wb - simulate a write back cache
• "trace file" is the name of a file that contains a memory access trace
• "cache size": cache size in bytes
• "block size": block size in bytes
• -d logs every access, the address breakdowns and the final cache contents
For example, to run a write back 16KB cache with 4 byte blocks over gcc.trace
sim wb gcc.trace 16384 4
Each trace line holds the program counter, the operation (R or W) and the address
0x804ae19: R 0x9cb3d40
and the trace ends at a "#eof" line.
"""
import logging
import sys
from simulation import Simulation
from cache import WritePolicy
from constants import CACHE_SIZE_BYTES, BLOCK_SIZE_BYTES
from errors import ConfigurationError, MalformedRecordError

LOGGER = logging.getLogger("cachesim")

USAGE = ("Usage: ./sim [-h] [-d] <write policy> <trace file> [cache size] [block size]\n\n"
         "<write policy> is one of: \n\twt - simulate a write through cache. \n\twb - simulate a write back cache \n\n"
         "<trace file> is the name of a file that contains a memory access trace.\n")

def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    debug = "-d" in args
    if debug:
        args.remove("-d")
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)

    if len(args) < 2 or "-h" in args:
        print(USAGE, file=sys.stderr)
        return 0

    try:
        write_policy = WritePolicy(args[0])
    except ValueError:
        print("Invalid Write Policy.\n" + USAGE, file=sys.stderr)
        return 1
    input_file = args[1]

    try:
        cache_size = int(args[2]) if len(args) > 2 else CACHE_SIZE_BYTES
        block_size = int(args[3]) if len(args) > 3 else BLOCK_SIZE_BYTES
    except ValueError:
        print("Invalid cache parameters.\n" + USAGE, file=sys.stderr)
        return 1

    LOGGER.info(f"Command arguments: write policy - {write_policy.name}, trace file - {input_file}, cache size - {cache_size}, block size - {block_size}")

    try:
        simulation = Simulation(write_policy, input_file, cache_size, block_size)
        simulation.simulate()
    except ConfigurationError as e:
        print(f"Invalid cache parameters. {e}", file=sys.stderr)
        return 1
    except OSError:
        print("Error: Could not open file.", file=sys.stderr)
        return 1
    except MalformedRecordError as e:
        print(f"{e.record_number}: ERROR!!!!")
        LOGGER.error(str(e))
        return 1

    if debug:
        simulation.print_cache()
    simulation.print_final_outputs()
    return 0

if __name__ == "__main__":
    sys.exit(main())
