from tpower import compute_power

# Example 1: two groups, the power is low
power, result = compute_power([1.1, 0.1, 30], [1.2, 0.3, 25], 0.05, 2)
print(f"pow = {power:.4f}")
print(result)

# Example 2: the effect size needed for a power of 0.9
power, result = compute_power([1.1, 0.1, 30], [1.1 + 0.2108, 0.3, 25], 0.05, 2)
print(f"pow = {power:.4f}")

# Example 3: the sample size needed for a power of 0.9. The estimate of
# the sample size is slightly low, so it pays off to estimate again with
# the new sizes
power, result = compute_power([1.1, 0.1, 98], [1.2, 0.3, 98], 0.05, 2)
print(f"pow = {power:.4f}")
print(result.min_sample_sizes)

# One-sample t-test against a value, one-tailed, validated by simulation
power, result = compute_power(
    [1.1, 0.1, 30], 1.05, tails=1, simulate=True, rng=1, verbose=True
)
