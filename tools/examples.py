"""
Print the catalog of a track database and one bin-count query.

Usage:
    python tools/examples.py [ROOT] [CHROM:START-END] [BIN_WIDTH]

ROOT defaults to the PYTRACKS_ROOT environment variable.
"""

import logging
import sys

import pytracks as pt


def main():
    logging.basicConfig(level=logging.DEBUG)
    args = sys.argv[1:]
    root = args[0] if args else None
    region = args[1] if len(args) > 1 else "chr1:1-10000"
    bin_width = int(args[2]) if len(args) > 2 else 100

    pt.db_init(root)
    print("Database:", pt.db_info())
    print(pt.track_table())

    chrom, _, coords = region.partition(":")
    start, _, end = coords.partition("-")
    location = pt.Location(chrom, int(start), int(end))

    for platform in pt.track_platforms():
        for genome in pt.track_genomes(platform):
            for info in pt.track_ls(platform, genome):
                try:
                    counts = pt.track_bin_counts(location, bin_width, platform, genome, info.name)
                except pt.TrackOpenError as exc:
                    print(f"{platform}/{genome}/{info.name}: {exc}")
                    continue
                print(f"{platform}/{genome}/{info.name} from {counts.start}:")
                print(counts.to_dataframe())
                return


if __name__ == "__main__":
    main()
