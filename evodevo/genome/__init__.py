from evodevo.genome.loci import GenomeLayout, build_locus_table

__all__ = ["GenomeLayout", "build_locus_table"]
