# Usage example

# Import the power analysis utility functions from the package
from tpower import compute_power, refine_sample_sizes
from tpower.analytical import make_test_configuration


if __name__ == "__main__":
    # Group 1 has mean = 1.1, stddev = 0.1 and 30 subjects
    group1 = (1.1, 0.1, 30)

    # Group 2 has mean = 1.2, stddev = 0.3 and 25 subjects
    group2 = (1.2, 0.3, 25)

    # Define experiment parameters
    alpha = 0.05
    tails = 2
    seed = 13

    # Compute the power analytically, and validate it by simulation
    power, result = compute_power(
        group1, group2, alpha, tails, simulate=True, rng=seed, verbose=True
    )

    # The power of this two-sample t-test is low
    assert abs(power - 0.3375) < 1e-4

    # 98 subjects per group would be needed to reach a power of 0.9 ...
    assert result.min_sample_sizes == [58, 73, 98, 121, 170]

    # ... or an absolute effect size of 0.2108
    print(dict(zip(result.power_levels, result.min_effect_sizes)))

    # Sizes refined with the t-distribution are a bit larger
    config = make_test_configuration(group1, group2, alpha, tails)
    print(refine_sample_sizes(config))
